"""Ports - interfaces between the topology domain and the outside world."""
