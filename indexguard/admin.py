from django.contrib import admin

from .models import Airline, Airport, Flight, Route


@admin.register(Airport)
class AirportAdmin(admin.ModelAdmin):
    list_display = ('iata', 'name', 'city', 'country', 'departure_count', 'arrival_count', 'destinations_count')
    search_fields = ('iata', 'name', 'city')


@admin.register(Airline)
class AirlineAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'iata', 'country')
    search_fields = ('code', 'name', 'iata')


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ('origin_iata', 'destination_iata', 'flights_per_day', 'has_flight_data', 'weekly_flights')
    list_filter = ('has_flight_data', 'is_domestic')
    search_fields = ('origin_iata', 'destination_iata', 'destination_city')


@admin.register(Flight)
class FlightAdmin(admin.ModelAdmin):
    list_display = ('airline_iata', 'flight_number', 'origin_iata', 'destination_iata')
    search_fields = ('flight_number', 'origin_iata', 'destination_iata')
