"""
Partner vendors, donations, fund transparency and administrator accounts.
"""
