"""Core engine: curves, fees, TWAV oracle, vaults and the protocol admin"""
