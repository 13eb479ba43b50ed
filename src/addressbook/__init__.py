"""Address book REST service: people with names and phone numbers, listed with cursor pagination."""
