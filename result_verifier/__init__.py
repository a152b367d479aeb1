"""
Result Sheet Verifier — check a photographed result sheet against the registry.

Architecture: AI vision extraction → Normalization → Registry lookup → Trust decision
Philosophy:  Let the AI read the sheet. Let only code decide if it is genuine.
"""

__version__ = "1.0.0"
