"""Run the route-patch command line tool with `python -m route_patch`."""

from route_patch.tool.route_patch import main

if __name__ == "__main__":
    main()
