"""DroidSpice: parametrized ngspice front end (netlist encoding and result decoding)."""
