"""Database models for the indexguard app.

The catalog holds airports, airlines, routes and individual scheduled
flights. Counters on :class:`Airport` and the aggregate fields on
:class:`Route` are maintained by the import pipeline; the engine only
reads them.
"""

from __future__ import annotations

from django.db import models


class Airport(models.Model):
    """An airport with its departure/arrival activity counters."""

    iata = models.CharField(max_length=3, unique=True)
    name = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=255, blank=True)
    country = models.CharField(max_length=255, blank=True)
    departure_count = models.PositiveIntegerField(default=0)
    arrival_count = models.PositiveIntegerField(default=0)
    destinations_count = models.PositiveIntegerField(default=0)
    terminals = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['iata']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.iata


class Airline(models.Model):
    """Airline catalog entry keyed by its code."""

    code = models.CharField(max_length=8, unique=True)
    name = models.CharField(max_length=255)
    iata = models.CharField(max_length=3, blank=True)
    country = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ['code']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.name} ({self.code})"


class Route(models.Model):
    """An origin/destination pair with aggregate schedule data."""

    origin_iata = models.CharField(max_length=3, db_index=True)
    destination_iata = models.CharField(max_length=3, db_index=True)
    destination_city = models.CharField(max_length=255, blank=True)
    flights_per_day = models.CharField(max_length=32, blank=True)
    has_flight_data = models.BooleanField(default=False)
    average_duration = models.CharField(max_length=32, blank=True)
    typical_duration = models.CharField(max_length=32, blank=True)
    is_domestic = models.BooleanField(null=True, blank=True)
    weekly_flights = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = ('origin_iata', 'destination_iata')
        ordering = ['origin_iata', 'destination_iata']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.origin_iata}-{self.destination_iata}"


class Flight(models.Model):
    """A single scheduled flight between two airports."""

    airline_iata = models.CharField(max_length=3, blank=True)
    flight_number = models.CharField(max_length=16, blank=True)
    origin_iata = models.CharField(max_length=3, db_index=True)
    destination_iata = models.CharField(max_length=3, db_index=True)

    class Meta:
        ordering = ['origin_iata', 'destination_iata', 'flight_number']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.airline_iata}{self.flight_number} {self.origin_iata}-{self.destination_iata}"
