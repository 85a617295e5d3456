from calorie_tracker.cli import main

main()
