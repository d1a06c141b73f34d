from cafe_sim.app import main

main()
