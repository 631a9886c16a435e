"""Record storage and authorization layer of the OPAL hospital backend.

This package contains the key-value model, the record store built on
it, the bearer-token identity resolver, the role policy, the domain
services and the API routes the dashboards call.
"""
