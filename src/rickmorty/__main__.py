from rickmorty.cli import main

main()
