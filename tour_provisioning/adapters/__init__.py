"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the provisioning services to external systems:
- Stores (in-memory, Supabase)
- View caches (in-memory, null)
- User notifications (logging)
- Geocoding services (Nominatim)
"""
