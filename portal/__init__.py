"""
Patient portal identity and credential service.
"""
