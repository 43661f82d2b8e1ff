import os

from gymbro.models.comment import Comment
from gymbro.models.like import Like
from gymbro.models.post import Post


def _upload_path(app, public_path):
    return os.path.join(app.config['UPLOAD_FOLDER'], public_path[len('/uploads/'):])


def test_create_post(client, register):
    user = register('lifter')

    response = client.post('/api/posts', json={ 'content': '  New PR on bench!  ' }, headers=user['headers'])

    assert response.status_code == 201
    post = response.get_json()
    assert post['content'] == 'New PR on bench!'
    assert post['id'] == post['_id']
    assert post['image'] is None
    assert post['user']['id'] == user['id']
    assert post['user']['username'] == 'lifter'
    assert post['likesCount'] == 0
    assert post['commentsCount'] == 0
    assert post['liked'] is False


def test_create_post_requires_content(client, register):
    user = register('lifter')

    response = client.post('/api/posts', json={ 'content': '   ' }, headers=user['headers'])

    assert response.status_code == 400
    assert response.get_json()['message'] == 'Post content is required'


def test_create_post_requires_auth(client):
    response = client.post('/api/posts', json={ 'content': 'hello' })

    assert response.status_code == 401


def test_create_post_with_image(client, app, register, png_file):
    user = register('lifter')

    response = client.post('/api/posts', data={ 'content': 'Gym selfie', 'image': png_file() },
                           headers=user['headers'], content_type='multipart/form-data')

    assert response.status_code == 201
    image = response.get_json()['image']
    assert image.startswith('/uploads/posts/post-')
    assert image.endswith('.png')
    assert os.path.isfile(_upload_path(app, image))

    served = client.get(image)
    assert served.status_code == 200
    assert served.data.startswith(b'\x89PNG')
    served.close()


def test_create_post_rejects_non_image(client, register, png_file):
    user = register('lifter')

    response = client.post('/api/posts', data={ 'content': 'Oops', 'image': png_file('notes.txt', 'text/plain') },
                           headers=user['headers'], content_type='multipart/form-data')

    assert response.status_code == 400
    assert 'Invalid file type' in response.get_json()['message']
    assert Post.objects.count() == 0


def test_create_post_ignores_image_path_in_body(client, app, register, png_file):
    victim = register('victim')
    attacker = register('attacker')
    picture = client.put('/api/users/profile-picture', data={ 'profilePicture': png_file() },
                         headers=victim['headers'], content_type='multipart/form-data').get_json()['profilePicture']

    post = client.post('/api/posts', json={ 'content': 'Not mine', 'image': picture },
                       headers=attacker['headers']).get_json()
    assert post['image'] is None

    client.put(f'/api/posts/{post["id"]}', json={ 'image': picture }, headers=attacker['headers'])
    client.delete(f'/api/posts/{post["id"]}', headers=attacker['headers'])

    assert os.path.isfile(_upload_path(app, picture))


def test_legacy_image_path_is_normalized(client, register, create_post):
    user = register('lifter')
    post = create_post(user)
    Post.objects(id=post['id']).update_one(set__image='uploads\\posts\\post-1.png')

    response = client.get(f'/api/posts/{post["id"]}')

    assert response.get_json()['post']['image'] == '/uploads/posts/post-1.png'


def test_get_all_posts_paginates(client, register, create_post):
    user = register('lifter')
    for index in range(3):
        create_post(user, f'Workout {index}')

    response = client.get('/api/posts?page=1&limit=2')

    assert response.status_code == 200
    body = response.get_json()
    assert len(body['posts']) == 2
    assert body['totalPosts'] == 3
    assert body['currentPage'] == 1
    assert body['totalPages'] == 2
    assert body['hasMore'] is True
    assert 'liked' not in body['posts'][0]

    body = client.get('/api/posts?page=2&limit=2').get_json()
    assert len(body['posts']) == 1
    assert body['hasMore'] is False


def test_get_posts_filtered_by_user(client, register, create_post):
    lifter = register('lifter')
    runner = register('runner')
    create_post(lifter, 'Deadlifts')
    create_post(runner, '10k run')
    create_post(runner, 'Intervals')

    body = client.get(f'/api/posts?userId={runner["id"]}').get_json()
    assert body['totalPosts'] == 2
    assert all(post['user']['id'] == runner['id'] for post in body['posts'])

    body = client.get(f'/api/posts/user/{lifter["id"]}').get_json()
    assert body['totalPosts'] == 1
    assert body['posts'][0]['content'] == 'Deadlifts'


def test_get_post(client, register, create_post):
    user = register('lifter')
    post = create_post(user)

    response = client.get(f'/api/posts/{post["id"]}', headers=user['headers'])

    assert response.status_code == 200
    assert response.get_json()['post']['id'] == post['id']
    assert response.get_json()['post']['liked'] is False


def test_get_post_not_found(client):
    assert client.get('/api/posts/5f8d0d55b54764421b7156c9').status_code == 404
    assert client.get('/api/posts/not-an-id').status_code == 404


def test_trending_posts_order_by_likes(client, register, create_post):
    author = register('author')
    fans = [register(f'fan{index}') for index in range(2)]
    quiet = create_post(author, 'Quiet post')
    popular = create_post(author, 'Popular post')
    medium = create_post(author, 'Medium post')

    for fan in fans:
        client.post(f'/api/likes/post/{popular["id"]}', headers=fan['headers'])
    client.post(f'/api/likes/post/{medium["id"]}', headers=fans[0]['headers'])

    response = client.get('/api/posts/trending?limit=3', headers=fans[0]['headers'])

    assert response.status_code == 200
    posts = response.get_json()
    assert [post['id'] for post in posts] == [popular['id'], medium['id'], quiet['id']]
    assert [post['likesCount'] for post in posts] == [2, 1, 0]
    assert [post['liked'] for post in posts] == [True, True, False]


def test_update_post(client, register, create_post):
    user = register('lifter')
    post = create_post(user)

    response = client.put(f'/api/posts/{post["id"]}', json={ 'content': 'Updated' }, headers=user['headers'])

    assert response.status_code == 200
    assert response.get_json()['content'] == 'Updated'
    assert Post.objects(id=post['id']).first().content == 'Updated'


def test_update_post_by_other_user(client, register, create_post):
    owner = register('owner')
    other = register('other')
    post = create_post(owner)

    response = client.put(f'/api/posts/{post["id"]}', json={ 'content': 'Hacked' }, headers=other['headers'])

    assert response.status_code == 403
    assert Post.objects(id=post['id']).first().content == 'Leg day done'


def test_update_post_replaces_and_removes_image(client, app, register, png_file):
    user = register('lifter')
    created = client.post('/api/posts', data={ 'content': 'Pic', 'image': png_file() },
                          headers=user['headers'], content_type='multipart/form-data').get_json()
    first_image = created['image']

    replaced = client.put(f'/api/posts/{created["id"]}', data={ 'image': png_file('second.png') },
                          headers=user['headers'], content_type='multipart/form-data').get_json()
    second_image = replaced['image']

    assert second_image != first_image
    assert not os.path.exists(_upload_path(app, first_image))
    assert os.path.isfile(_upload_path(app, second_image))

    removed = client.put(f'/api/posts/{created["id"]}', data={ 'removeImage': 'true' },
                         headers=user['headers'], content_type='multipart/form-data').get_json()

    assert removed['image'] is None
    assert not os.path.exists(_upload_path(app, second_image))


def test_failed_update_keeps_existing_image(client, app, register, png_file):
    user = register('lifter')
    created = client.post('/api/posts', data={ 'content': 'Pic', 'image': png_file() },
                          headers=user['headers'], content_type='multipart/form-data').get_json()

    response = client.put(f'/api/posts/{created["id"]}', data={ 'content': 'y' * 1001, 'removeImage': 'true' },
                          headers=user['headers'], content_type='multipart/form-data')

    assert response.status_code == 400
    assert os.path.isfile(_upload_path(app, created['image']))
    assert Post.objects(id=created['id']).first().image == created['image']

    response = client.put(f'/api/posts/{created["id"]}', data={ 'content': 'y' * 1001, 'image': png_file('new.png') },
                          headers=user['headers'], content_type='multipart/form-data')

    assert response.status_code == 400
    assert os.path.isfile(_upload_path(app, created['image']))
    assert os.listdir(os.path.join(app.config['UPLOAD_FOLDER'], 'posts')) == [created['image'].rsplit('/', 1)[-1]]


def test_delete_post_removes_comments_likes_and_image(client, app, register, png_file):
    owner = register('owner')
    fan = register('fan')
    post = client.post('/api/posts', data={ 'content': 'Pic', 'image': png_file() },
                       headers=owner['headers'], content_type='multipart/form-data').get_json()

    client.post(f'/api/comments/post/{post["id"]}', json={ 'content': 'Nice' }, headers=fan['headers'])
    client.post(f'/api/likes/post/{post["id"]}', headers=fan['headers'])

    response = client.delete(f'/api/posts/{post["id"]}', headers=owner['headers'])

    assert response.status_code == 200
    assert response.get_json() == { 'message': 'Post deleted successfully', 'postId': post['id'] }
    assert Post.objects(id=post['id']).count() == 0
    assert Comment.objects.count() == 0
    assert Like.objects.count() == 0
    assert not os.path.exists(_upload_path(app, post['image']))


def test_delete_post_by_other_user(client, register, create_post):
    owner = register('owner')
    other = register('other')
    post = create_post(owner)

    response = client.delete(f'/api/posts/{post["id"]}', headers=other['headers'])

    assert response.status_code == 403
    assert Post.objects(id=post['id']).count() == 1


def test_delete_missing_post(client, register):
    user = register('lifter')

    assert client.delete('/api/posts/5f8d0d55b54764421b7156c9', headers=user['headers']).status_code == 404
    assert client.delete('/api/posts/bad-id', headers=user['headers']).status_code == 404


def test_delete_post_requires_auth(client, register, create_post):
    post = create_post(register('owner'))

    response = client.delete(f'/api/posts/{post["id"]}')

    assert response.status_code == 401
    assert response.get_json()['message'] == 'Access token is required'
