from libalibe.cli.app import main

main()
