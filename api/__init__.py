"""HTTP API for the time tracker."""
