"""Pricing and billing calculation engine."""
