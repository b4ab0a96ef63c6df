"""
Room operation helpers for integration tests.
Provides common patterns for creating, joining and playing in rooms.
"""

from typing import Any, Dict, List, Optional

# Allow-list used by the test PlaceValidator
TEST_PLACES = [
    'Argentina', 'Albania', 'Algeria', 'Angola', 'Austria', 'Australia',
    'Brazil', 'Belgium', 'Bolivia', 'Canada', 'Chile', 'China',
    'Egypt', 'Estonia', 'France', 'Germany', 'Ghana', 'Hungary',
    'India', 'Italy', 'Japan', 'Kenya', 'Lebanon', 'Mali', 'Nepal',
    'Norway', 'Oman', 'Peru', 'Spain', 'Yemen',
    'New York', 'New Delhi', 'Rio de Janeiro', 'Athens', 'Oslo',
]


def find_event_in_received(received: List[Dict[str, Any]], event_name: str) -> Optional[Dict[str, Any]]:
    """Last event named ``event_name`` in a get_received() list, or None."""
    matches = find_all_events_in_received(received, event_name)
    return matches[-1] if matches else None


def find_all_events_in_received(received: List[Dict[str, Any]], event_name: str) -> List[Dict[str, Any]]:
    return [event for event in received if event['name'] == event_name]


def create_room_helper(client, username: str = 'Host') -> str:
    """
    Create a room from ``client`` and return its id.

    Raises:
        AssertionError: If room creation fails
    """
    client.get_received()
    ack = client.emit('createRoom', username, callback=True)
    assert ack['success'] is True, f"Room creation should succeed: {ack.get('message')}"
    return ack['roomId']


def join_room_helper(client, room_id: str, username: str = 'Guest') -> Dict[str, Any]:
    """
    Join ``room_id`` from ``client`` and return the room snapshot.

    Raises:
        AssertionError: If room joining fails
    """
    client.get_received()
    ack = client.emit('joinRoom', {'roomId': room_id, 'username': username}, callback=True)
    assert ack['success'] is True, f"Room join should succeed: {ack.get('message')}"
    return ack['roomData']


def submit_place_helper(client, place: str) -> List[Dict[str, Any]]:
    """Submit ``place`` and return everything ``client`` received afterwards."""
    client.get_received()
    client.emit('submitPlace', place)
    return client.get_received()


def last_error_message(client) -> Optional[str]:
    """Reason string of the most recent ``error`` event received by ``client``."""
    event = find_event_in_received(client.get_received(), 'error')
    return event['args'][0] if event else None
