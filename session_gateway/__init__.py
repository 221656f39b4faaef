"""
Session gateway package.

Brokers learning-session launches against the upstream Player service and
proxies runtime LRS/fetch traffic for each session.
"""
