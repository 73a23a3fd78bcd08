"""
Backend Massive Action Tracker.

Provisioning des comptes (paiement, comptes offerts, membres d'equipe)
et synchronisation des clients avec GoHighLevel.
"""

__version__ = "1.0.0"
