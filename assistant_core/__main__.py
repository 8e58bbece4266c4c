from assistant_core.gui.app import main

main()
