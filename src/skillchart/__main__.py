from skillchart.cli.main import main

main()
