"""
db/ - Database Layer
====================
Handles PostgreSQL connections, transactions, schema initialization and sample data.
This layer is the lowest in the architecture and has no dependencies on other layers
(the seed loader aside, which goes through the repositories).
"""
