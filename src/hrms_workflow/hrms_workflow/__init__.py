"""HRMS approval workflow package.

This package is organized by feature modules (workflow, requests, users, ...)
with a thin Flask controller layer and service/repository layers around a pure
approval engine.
"""
