"""
Outbound rendering for the messaging transport.
"""
