"""Booking relay for the limousine website.

Validates booking form submissions and fans them out to the spreadsheet,
email and messaging notification channels.
"""
