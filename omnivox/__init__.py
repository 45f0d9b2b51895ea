"""Omnivox / Léa scraper: documents, assignments and calendar events of one student."""
