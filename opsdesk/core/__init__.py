"""Core configuration, access-control catalog and scope resolution."""
