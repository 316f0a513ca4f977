"""Allow `python -m gitview`."""

from gitview.cli import main

main()
