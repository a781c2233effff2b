from toolpack.cli import main

main()
