"""Recommendation module for CartRec.

This module contains the price normalizer, similarity scorer and ranking
engine, along with the readers that load the product catalog and user
carts the engine works on.
"""
