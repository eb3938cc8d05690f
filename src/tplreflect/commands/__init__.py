"""CLI subcommands, loaded lazily by tplreflect.cli."""
