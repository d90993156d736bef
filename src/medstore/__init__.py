"""MedStore — medical supplies storefront backend."""
