"""SwiftAid emergency ambulance dispatch API."""
