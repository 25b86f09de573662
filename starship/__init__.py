"""
End-to-end checks for starship testnet topologies.
"""
