from hitrouter.cli import main

main()
