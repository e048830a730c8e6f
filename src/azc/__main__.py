from azc.cli.main import main

main()
