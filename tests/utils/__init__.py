"""Test data and trigger event builders."""
