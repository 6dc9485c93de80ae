"""
Test suite for the carbonate equilibrium MCP server.

Organization:
- test_species.py - Concentration / PH value types and the exception hierarchy
- test_equilibrium.py - Henry's law, dissociation and mass-balance formulas
- test_solver.py - Bounded fixed-point solver
- test_carbonate_system.py - CarbonateSystem construction paths
- test_carbonate_tools.py - Tier 1 speciation tools and result schemas
- test_speciation_sweeps.py - pH and bicarbonate sweeps
- test_sweep_presets.py - YAML preset database and fallbacks
- test_validation.py - Reference benchmark cases
- test_server.py - MCP input models and tool registration

Run with:
    pytest tests/
    pytest tests/ --cov=core --cov=tools --cov=utils
"""
