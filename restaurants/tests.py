"""
Tests for Restaurants app ViewSet.
"""
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from restaurants.factories import AddressFactory, RestaurantFactory


class RestaurantViewSetTest(APITestCase):
    """Tests for RestaurantViewSet (read-only)."""

    def setUp(self):
        self.pizza = RestaurantFactory(name='Pizza Place', address=AddressFactory(city='Springfield'))
        self.sushi = RestaurantFactory(name='Sushi Bar', address=AddressFactory(city='Shelbyville'))
        self.closed = RestaurantFactory(name='Closed Diner', is_active=False)

    def test_list_active_restaurants(self):
        response = self.client.get(reverse('restaurant-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['name'] for r in response.data], ['Pizza Place', 'Sushi Bar'])

    def test_retrieve_restaurant(self):
        response = self.client.get(reverse('restaurant-detail', args=[self.pizza.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Pizza Place')
        self.assertEqual(response.data['phone'], '+12025551234')
        self.assertIn('Springfield', response.data['address'])

    def test_inactive_restaurant_not_found(self):
        response = self.client.get(reverse('restaurant-detail', args=[self.closed.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_restaurants(self):
        response = self.client.get(reverse('restaurant-list') + '?search=sushi')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], 'Sushi Bar')

    def test_filter_by_city(self):
        response = self.client.get(reverse('restaurant-list'), {'address__city': 'Shelbyville'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], 'Sushi Bar')
