from git_clean.cli.cli import main

main()
