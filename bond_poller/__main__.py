from bond_poller.main import main

main()
