from bgg_climb.main import main

main()
