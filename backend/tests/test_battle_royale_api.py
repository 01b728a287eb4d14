from sudoku_royale.models import MatchRecord
from sudoku_royale.services.battle_royale import rooms, scheduler

BASE = '/api/battle-royale'


def create_room(client, player_id='host', **body):
    payload = {'player_id': player_id, 'name': player_id.title()}
    payload.update(body)
    return client.post(f'{BASE}/create', json=payload)


def started_room(client, flask_app, *guests):
    code = create_room(client).get_json()['room_code']
    for guest in guests:
        client.post(f'{BASE}/join/{code}', json={'player_id': guest, 'name': guest.title()})
    assert client.post(f'{BASE}/{code}/start', json={'player_id': 'host'}).status_code == 200
    # The countdown does not run under TESTING
    assert scheduler.activate(flask_app, code)
    return code


def test_create_room(client):
    res = create_room(client, max_players=80)
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    assert len(data['room_code']) == 6
    assert data['players'] == 1
    assert data['max_players'] == 50
    assert rooms.get(data['room_code']).puzzle.difficulty == 'easy'


def test_create_requires_player(client):
    res = client.post(f'{BASE}/create', json={})
    assert res.status_code == 400
    res = create_room(client, difficulty='impossible')
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_difficulty'


def test_list_and_join(client):
    code = create_room(client).get_json()['room_code']
    listed = client.get(f'{BASE}/rooms?player_id=guest').get_json()['rooms']
    assert [r['room_code'] for r in listed] == [code]
    assert client.get(f'{BASE}/rooms?player_id=host').get_json()['rooms'] == []

    res = client.post(f'{BASE}/join/{code.lower()}', json={'player_id': 'guest', 'name': 'Guest'})
    assert res.status_code == 200
    assert res.get_json()['players'] == 2

    res = client.post(f'{BASE}/join/{code}', json={'player_id': 'guest', 'name': 'Guest'})
    assert res.get_json()['code'] == 'already_joined'
    assert client.post(f'{BASE}/join/ZZZZZZ', json={'player_id': 'x'}).status_code == 404


def test_join_full_room(client):
    code = create_room(client, max_players=2).get_json()['room_code']
    client.post(f'{BASE}/join/{code}', json={'player_id': 'p2'})
    res = client.post(f'{BASE}/join/{code}', json={'player_id': 'p3'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'room_full'


def test_room_snapshot(client):
    code = create_room(client).get_json()['room_code']
    snap = client.get(f'{BASE}/{code}?player_id=host').get_json()
    assert snap['status'] == 'waiting'
    assert snap['is_host'] is True
    assert snap['my_board'] == snap['puzzle']
    assert snap['settings']['min_players'] == 2

    res = client.get(f'{BASE}/{code}?player_id=stranger')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'player_not_found'


def test_start_rules(client):
    code = create_room(client).get_json()['room_code']
    res = client.post(f'{BASE}/{code}/start', json={'player_id': 'host'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'not_enough_players'

    client.post(f'{BASE}/join/{code}', json={'player_id': 'p2'})
    res = client.post(f'{BASE}/{code}/start', json={'player_id': 'p2'})
    assert res.status_code == 403
    assert res.get_json()['code'] == 'not_host'

    res = client.post(f'{BASE}/{code}/start', json={'player_id': 'host'})
    assert res.get_json() == {'success': True, 'status': 'starting'}
    res = client.post(f'{BASE}/{code}/move', json={'player_id': 'host', 'row': 0, 'col': 0, 'value': 1})
    assert res.get_json()['code'] == 'room_not_active'


def test_moves_and_win_are_archived(client, flask_app):
    code = started_room(client, flask_app, 'p2')
    room = rooms.get(code)
    blanks = [(r, c) for r in range(9) for c in range(9) if room.puzzle.givens[r][c] == 0]

    r, c = blanks[0]
    wrong = room.puzzle.solution[r][c] % 9 + 1
    data = client.post(f'{BASE}/{code}/move', json={'player_id': 'p2', 'row': r, 'col': c, 'value': wrong}).get_json()
    assert data['success'] and not data['is_correct']
    assert data['mistake_count'] == 1

    for r, c in blanks:
        data = client.post(f'{BASE}/{code}/move', json={
            'player_id': 'host', 'row': r, 'col': c, 'value': room.puzzle.solution[r][c],
        }).get_json()
    assert data['completed'] is True
    assert data['progress_percent'] == 100

    assert room.status == 'finished'
    assert room.winner.identity == 'host'
    # The finished room leaves the live store once archived
    assert client.get(f'{BASE}/{code}?player_id=p2').status_code == 404

    record = MatchRecord.query.filter_by(room_code=code).one()
    assert record.winner_handle == 'Host'

    history = client.get(f'{BASE}/history?player_id=p2').get_json()['history']
    assert len(history) == 1
    assert history[0]['position'] == 2
    assert history[0]['won'] is False
    assert history[0]['mistakes'] == 1
    assert client.get(f'{BASE}/history?player_id=host').get_json()['history'][0]['won'] is True


def test_leave_transfers_host_then_deletes(client):
    code = create_room(client).get_json()['room_code']
    client.post(f'{BASE}/join/{code}', json={'player_id': 'p2'})

    res = client.post(f'{BASE}/{code}/leave', json={'player_id': 'host'})
    assert res.get_json() == {'success': True, 'room_deleted': False}
    assert client.get(f'{BASE}/{code}?player_id=p2').get_json()['host_id'] == 'p2'

    res = client.post(f'{BASE}/{code}/leave', json={'player_id': 'p2'})
    assert res.get_json() == {'success': True, 'room_deleted': True}
    assert client.get(f'{BASE}/{code}?player_id=p2').status_code == 404
