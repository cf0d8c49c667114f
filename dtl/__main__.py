from dtl.main import main

main()
