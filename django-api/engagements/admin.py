from django.contrib import admin

from engagements.models import Booking, Event, Invitation, Review, Speaker


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ["speaker", "status", "agreed_rate", "organizer_rating"]
    readonly_fields = ["status", "organizer_rating"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "event_type", "format", "date_time", "status"]
    list_filter = ["status", "event_type", "format"]
    search_fields = ["title", "description", "location"]
    readonly_fields = ["status", "version"]
    inlines = [BookingInline]


@admin.register(Speaker)
class SpeakerAdmin(admin.ModelAdmin):
    list_display = ["profile_id", "experience_level", "available", "verified", "total_talks"]
    list_filter = ["experience_level", "available", "verified"]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["event", "speaker", "status", "organizer_rating", "created_at"]
    list_filter = ["status", "event__event_type"]
    readonly_fields = ["status", "version", "organizer_rating", "organizer_feedback", "reviewed_at"]


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    list_display = ["event", "speaker", "organizer_id", "proposed_rate", "created_at"]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ["reviewee", "rating", "reviewer_id", "created_at"]
    list_filter = ["rating"]
