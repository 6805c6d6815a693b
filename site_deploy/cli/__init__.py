"""Command line interface for site-deploy"""
