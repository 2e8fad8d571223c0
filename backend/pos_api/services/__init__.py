"""
Services package.

- domain: business logic (lifecycle coordinator, tables, menu, kitchen,
  checkout, reconcile)
- snapshot: versioned point-in-time copy of the store
- mirror: spreadsheet webhook client
"""
