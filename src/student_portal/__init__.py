"""Student Portal package.

This package is organized by feature modules (students, attendance, lectures, ...)
with a thin Flask controller layer and service/repository layers on top of a
JSON document store.
"""
