from errcode.cli.app import main

main()
