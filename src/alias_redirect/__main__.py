from alias_redirect.cli import main

main()
