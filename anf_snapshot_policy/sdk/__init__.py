"""Thin wrappers around the Azure management SDK for NetApp Files."""
