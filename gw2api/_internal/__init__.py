"""Internal modules for the gw2api client.

These are the building blocks behind GW2Client. Application code should
normally go through GW2Client, but the dispatcher is usable on its own.

Modules:
    dispatch - Request dispatcher (query assembly, dispatch modes)
    http - Shared HTTP client configuration
"""
