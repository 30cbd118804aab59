from ciphershell.cli import main

raise SystemExit(main())
