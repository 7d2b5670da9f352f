"""
Shipping API Routes
Public endpoints for shipping methods and cart shipping/tax estimates.
"""

from flask import Blueprint, request, jsonify, current_app
from voltedge.extensions import csrf
from voltedge.shipping.exceptions import ShippingDataUnavailableException, ShippingValidationException
from voltedge.shipping.service import ShippingService

shipping_bp = Blueprint('shipping', __name__, url_prefix='/api/shipping')


def _request_data():
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


@shipping_bp.route('/methods', methods=['GET'])
def get_methods():
    """
    Get all active shipping methods.

    Response:
        [
            {
                "id": 1,
                "key": "standard",
                "name": "Standard Shipping",
                "description": "Standard delivery service",
                "estimatedDays": "5-7 business days",
                "isActive": true,
                "defaultCost": 10.0
            },
            ...
        ]
    """
    try:
        methods = ShippingService.get_active_methods()
        return jsonify([method.to_dict() for method in methods]), 200
    except ShippingDataUnavailableException:
        return jsonify([]), 200
    except Exception as e:
        current_app.logger.error(f'Error fetching shipping methods: {e}')
        return jsonify({'error': 'Error fetching shipping methods'}), 500


@shipping_bp.route('/estimate', methods=['POST'])
@csrf.exempt
def estimate_shipping():
    """
    Shipping and tax estimate for the cart display.

    Request:
        {
            "cartItems": [{"productId": "p1", "quantity": 2, "weight": 1.5}],
            "country": "US",
            "state": "CA",
            "postalCode": "94105",
            "subtotal": 100.00,
            "method": "standard"          (optional)
        }

    Response:
        {
            "cost": 14.95,
            "isFreeShipping": false,
            "baseCost": 14.95,
            "distanceFee": 0.0,
            "method": "Standard Shipping",
            "estimatedDays": "5-7 business days",
            "taxRate": 0.0725,
            "taxAmount": 7.25,
            "total": 122.2
        }
    """
    try:
        data = _request_data()

        estimate = ShippingService.estimate(
            cart_items=data.get('cartItems'),
            subtotal=data.get('subtotal'),
            country=data.get('country'),
            state=data.get('state'),
            postal_code=data.get('postalCode'),
            method=data.get('method')
        )
        return jsonify(estimate.to_dict()), 200

    except ShippingValidationException as e:
        return jsonify({'error': str(e)}), 400
    except ShippingDataUnavailableException as e:
        current_app.logger.warning(f'Shipping estimate unavailable: {e}')
        return jsonify({'error': str(e), 'available': False}), 503
    except Exception as e:
        current_app.logger.error(f'Error calculating shipping estimate: {e}', exc_info=True)
        return jsonify({'error': 'Error calculating shipping estimate', 'available': False}), 500


@shipping_bp.route('/calculate', methods=['POST'])
@csrf.exempt
def calculate_shipping():
    """
    Quote every active shipping method for the cart.

    Request: same destination and cart fields as /estimate.

    Response:
        {
            "shippingOptions": [
                {"id": 1, "key": "standard", "name": "Standard Shipping", "cost": 8.95, ...},
                ...
            ],
            "taxRate": 0.045
        }
    """
    try:
        data = _request_data()

        result = ShippingService.calculate_options(
            cart_items=data.get('cartItems'),
            subtotal=data.get('subtotal'),
            country=data.get('country'),
            state=data.get('state'),
            postal_code=data.get('postalCode')
        )
        return jsonify(result), 200

    except ShippingValidationException as e:
        return jsonify({'error': str(e)}), 400
    except ShippingDataUnavailableException as e:
        current_app.logger.warning(f'Shipping options unavailable: {e}')
        return jsonify({'error': str(e), 'available': False}), 503
    except Exception as e:
        current_app.logger.error(f'Error calculating shipping options: {e}', exc_info=True)
        return jsonify({'error': 'Error calculating shipping options', 'available': False}), 500
