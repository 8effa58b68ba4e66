import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .serializers import (
    RidePostingSerializer,
    RideListQuerySerializer,
    BookRideSerializer,
    ClaimedRideSerializer,
)

# Import from services layer
from services.ride_management import (
    ABORTED,
    CLAIMED,
    ClaimNotFoundError,
    LocalPersistenceError,
    RideStoreError,
    SessionClaimCache,
    claim,
    list_claims,
    list_rides,
    retry_remote_delete,
    share_ride,
    unclaim,
)
from realtime.notifications import notify_ride_claimed, notify_ride_posted

logger = logging.getLogger(__name__)

# HTTP status for each booking outcome
CLAIM_STATUS_CODES = {
    CLAIMED: status.HTTP_201_CREATED,
    ABORTED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _claim_response(result, http_status=None):
    body = {
        'success': result.success,
        'status': result.status,
        'message': result.message,
        'ride': result.ride,
        'already_booked': result.already_claimed,
    }
    if result.error_code:
        body['error'] = result.error_code
    if result.listing is not None:
        body['listing'] = result.listing
    if result.dial_number:
        body['dial'] = f"tel:{result.dial_number}"
    if http_status is None:
        http_status = CLAIM_STATUS_CODES.get(result.status, status.HTTP_202_ACCEPTED)
    return Response(body, status=http_status)


# ==================== Listing APIs ====================

@api_view(['GET'])
def ride_list(request, vehicle=None):
    """
    Browse shared rides (dashboard search and the "Available ..." pages).

    Query params: vehicle, origin, destination. Origin and destination match
    case-insensitively anywhere in the text. Newest rides come first.
    """
    params = request.query_params.dict()
    if vehicle is not None:
        params['vehicle'] = vehicle

    query = RideListQuerySerializer(data=params)
    if not query.is_valid():
        return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

    rides = list_rides(
        vehicle=query.validated_data.get('vehicle'),
        origin=query.validated_data.get('origin'),
        destination=query.validated_data.get('destination'),
    )
    serializer = RidePostingSerializer(rides, many=True)
    return Response({
        'count': len(serializer.data),
        'rides': serializer.data,
    })


@api_view(['POST'])
def create_ride_posting(request):
    """Share a ride (Share Your Ride form)"""
    try:
        ride = share_ride(request.data)
    except RideStoreError:
        logger.exception('Failed to store shared ride')
        return Response(
            {
                'success': False,
                'error': 'store_unavailable',
                'message': 'Could not share your ride right now. Please try again.'
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    data = RidePostingSerializer(ride).data
    notify_ride_posted(data)

    return Response({
        **data,
        'message': 'Ride Shared Successfully!',
    }, status=status.HTTP_201_CREATED)


# ==================== Booking APIs ====================

@api_view(['POST'])
def book_ride(request):
    """
    Book a listed ride into this browser's "Your Rides".

    201 -> booked and removed from the listings
    202 -> saved to Your Rides, but the listing could not be removed
           (somebody else may already have it)
    503 -> could not save to Your Rides; nothing changed
    """
    serializer = BookRideSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    ride = dict(serializer.validated_data['ride'])
    result = claim(
        ride,
        SessionClaimCache(request.session),
        listing=serializer.validated_data.get('listing'),
    )

    if result.status == CLAIMED:
        notify_ride_claimed(result.ride['id'], result.ride['vehicle'])

    return _claim_response(result)


@api_view(['GET'])
def my_rides(request):
    """Rides booked from this browser"""
    try:
        rides = list_claims(SessionClaimCache(request.session))
    except LocalPersistenceError:
        logger.exception('Failed to load booked rides')
        return Response(
            {
                'success': False,
                'error': 'local_persistence_failed',
                'message': 'Could not load your booked rides.'
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return Response({
        'count': len(rides),
        'rides': ClaimedRideSerializer(rides, many=True).data,
    })


@api_view(['DELETE'])
def remove_my_ride(request, ride_id):
    """Remove a ride from Your Rides. The shared listings are not touched."""
    result = unclaim(ride_id, SessionClaimCache(request.session))

    if not result.success:
        return Response(
            {
                'success': False,
                'error': result.error_code,
                'message': result.message,
                'ride_id': result.ride_id,
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return Response({
        'success': True,
        'message': result.message,
        'ride_id': result.ride_id,
        'removed': result.removed,
    })


@api_view(['POST'])
def retry_listing_removal(request, ride_id):
    """Try again to remove a booked ride from the shared listings."""
    try:
        result = retry_remote_delete(ride_id, SessionClaimCache(request.session))
    except ClaimNotFoundError:
        return Response(
            {'error': 'Ride not found in your booked rides'},
            status=status.HTTP_404_NOT_FOUND
        )
    except LocalPersistenceError:
        logger.exception('Failed to load booked rides for ride %s', ride_id)
        return Response(
            {
                'success': False,
                'error': 'local_persistence_failed',
                'message': 'Could not load your booked rides.'
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    if result.status == CLAIMED:
        notify_ride_claimed(result.ride['id'], result.ride.get('vehicle'))
        return _claim_response(result, http_status=status.HTTP_200_OK)

    return _claim_response(result)
