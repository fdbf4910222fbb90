# tests/test_dogs.py
import io

from tests.conftest import register, create_dog, auth_headers


def _png(size=64):
    return io.BytesIO(b"\x89PNG\r\n\x1a\n" + b"\x00" * size)


def test_create_and_get_my_dog(client):
    token = register(client)['token']

    created = create_dog(client, token, name="  Rex  ", breed="Beagle", age=3)
    assert created['name'] == "Rex"
    assert created['breed'] == "Beagle"
    assert created['age'] == 3
    assert 'avatarPath' not in created

    response = client.get('/api/dogs/me', headers=auth_headers(token))
    assert response.status_code == 200
    assert response.get_json()['dogId'] == created['dogId']


def test_get_my_dog_is_404_before_profile_exists(client):
    token = register(client)['token']

    response = client.get('/api/dogs/me', headers=auth_headers(token))

    assert response.status_code == 404
    assert response.get_json()['error_code'] == "DOG_PROFILE_NOT_FOUND"


def test_dog_routes_require_auth(client):
    assert client.get('/api/dogs/me').status_code == 401
    assert client.post('/api/dogs', json={"name": "Rex"}).status_code == 401


def test_create_dog_requires_name(client):
    token = register(client)['token']

    for body in ({}, {"name": ""}, {"name": "   "}, {"breed": "Pug"}):
        response = client.post('/api/dogs', json=body, headers=auth_headers(token))
        assert response.status_code == 400


def test_create_dog_rejects_negative_age(client):
    token = register(client)['token']

    response = client.post('/api/dogs', json={"name": "Rex", "age": -1}, headers=auth_headers(token))

    assert response.status_code == 400


def test_second_dog_for_same_owner_fails(client):
    token = register(client)['token']
    create_dog(client, token)

    response = client.post('/api/dogs', json={"name": "Max"}, headers=auth_headers(token))

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "DOG_PROFILE_EXISTS"


def test_each_owner_gets_their_own_dog(client):
    first = register(client, email="a@example.com")['token']
    second = register(client, email="b@example.com")['token']
    create_dog(client, first, name="Rex")
    create_dog(client, second, name="Max")

    assert client.get('/api/dogs/me', headers=auth_headers(first)).get_json()['name'] == "Rex"
    assert client.get('/api/dogs/me', headers=auth_headers(second)).get_json()['name'] == "Max"


def test_update_missing_profile_is_404(client):
    token = register(client)['token']

    response = client.put('/api/dogs/me', json={"name": "Rex"}, headers=auth_headers(token))

    assert response.status_code == 404


def test_update_with_empty_age_keeps_stored_age(client, owner):
    response = client.put(
        '/api/dogs/me',
        data={"name": "", "age": "", "breed": "Beagle mix"},
        headers=auth_headers(owner['token']),
        content_type='multipart/form-data',
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body['age'] == 3
    assert body['name'] == "Rex"
    assert body['breed'] == "Beagle mix"


def test_update_only_touches_present_fields(client, owner):
    response = client.put('/api/dogs/me', json={"age": 4}, headers=auth_headers(owner['token']))

    body = response.get_json()
    assert body['age'] == 4
    assert body['name'] == "Rex"
    assert body['breed'] == "Beagle"


def test_update_can_clear_breed_with_empty_string(client, owner):
    response = client.put('/api/dogs/me', json={"breed": ""}, headers=auth_headers(owner['token']))

    assert response.status_code == 200
    assert response.get_json()['breed'] == ""


def test_avatar_upload_replaces_and_deletes_old_file(client, bucket, owner):
    headers = auth_headers(owner['token'])

    first = client.put('/api/dogs/me', data={"avatar": (_png(), "rex.png", "image/png")},
                       headers=headers, content_type='multipart/form-data').get_json()
    assert first['avatar'].startswith("https://storage.googleapis.com/")
    assert len(bucket.files) == 1
    first_path = next(iter(bucket.files))

    second = client.put('/api/dogs/me', data={"avatar": (_png(), "rex2.png", "image/png")},
                        headers=headers, content_type='multipart/form-data').get_json()
    assert second['avatar'] != first['avatar']
    assert first_path not in bucket.files
    assert len(bucket.files) == 1


def test_empty_avatar_field_clears_avatar(client, bucket, owner):
    headers = auth_headers(owner['token'])
    client.put('/api/dogs/me', data={"avatar": (_png(), "rex.png", "image/png")},
               headers=headers, content_type='multipart/form-data')

    response = client.put('/api/dogs/me', data={"avatar": ""}, headers=headers, content_type='multipart/form-data')

    assert response.status_code == 200
    assert response.get_json()['avatar'] is None
    assert bucket.files == {}


def test_avatar_with_wrong_type_is_rejected(client, bucket, owner):
    response = client.put('/api/dogs/me', data={"avatar": (io.BytesIO(b"GIF89a"), "rex.gif", "image/gif")},
                          headers=auth_headers(owner['token']), content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_AVATAR"
    assert bucket.files == {}


def test_avatar_over_size_limit_is_rejected(app, client, bucket, owner):
    too_big = app.config['AVATAR_MAX_BYTES'] + 1

    response = client.put('/api/dogs/me', data={"avatar": (_png(too_big), "rex.png", "image/png")},
                          headers=auth_headers(owner['token']), content_type='multipart/form-data')

    assert response.status_code == 400
    assert bucket.files == {}


def test_failed_save_removes_new_upload_and_keeps_old_avatar(client, db, bucket, owner):
    headers = auth_headers(owner['token'])
    old = client.put('/api/dogs/me', data={"avatar": (_png(), "rex.png", "image/png")},
                     headers=headers, content_type='multipart/form-data').get_json()
    old_files = dict(bucket.files)

    db.fail_updates = True
    response = client.put('/api/dogs/me', data={"avatar": (_png(), "new.png", "image/png")},
                          headers=headers, content_type='multipart/form-data')
    db.fail_updates = False

    assert response.status_code == 500
    assert bucket.files.keys() == old_files.keys()
    assert client.get('/api/dogs/me', headers=headers).get_json()['avatar'] == old['avatar']


def test_failed_old_avatar_delete_still_saves(client, bucket, owner):
    headers = auth_headers(owner['token'])
    client.put('/api/dogs/me', data={"avatar": (_png(), "rex.png", "image/png")},
               headers=headers, content_type='multipart/form-data')

    bucket.fail_deletes = True
    response = client.put('/api/dogs/me', data={"avatar": (_png(), "new.png", "image/png")},
                          headers=headers, content_type='multipart/form-data')

    assert response.status_code == 200
    # The old file is orphaned rather than the dog losing its avatar.
    assert len(bucket.files) == 2
    assert response.get_json()['avatar'] is not None


def test_empty_update_leaves_profile_untouched(client, db, owner):
    headers = auth_headers(owner['token'])
    stored = client.get('/api/dogs/me', headers=headers).get_json()
    before = dict(db.data['dogs'][owner['dog']['dogId']])

    response = client.put('/api/dogs/me', json={}, headers=headers)

    assert response.status_code == 200
    assert response.get_json() == stored
    assert db.data['dogs'][owner['dog']['dogId']] == before
