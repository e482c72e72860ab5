"""Salesforce auth, REST client and SOQL helpers."""
