from osh.shell import main

main()
