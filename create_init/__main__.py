from create_init.pipeline import main

main()
