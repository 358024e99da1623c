from initgen.cli import main

main()
