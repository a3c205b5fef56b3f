"""Configuration templates shipped with backdrop."""
